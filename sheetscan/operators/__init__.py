"""Scan cursor and row projection"""
