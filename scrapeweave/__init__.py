"""Declarative scraping schemes.

This package provides the scheme model used to describe how structured data
is pulled out of a page, and the transformations over it: locating element
paths, relativizing list element paths, running schemes against HTML and
interlacing scraped content back into a scheme for display.
"""
