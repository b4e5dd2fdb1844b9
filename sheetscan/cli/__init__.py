"""SheetScan command line interface"""
