"""Configuration, types, errors and the scan lifecycle"""
