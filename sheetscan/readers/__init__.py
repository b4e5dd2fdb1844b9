"""Remote table fetching and row readers"""
