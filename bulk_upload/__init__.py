"""Bulk property upload validator.

Spreadsheet rows are mapped onto PropertyRow records, checked against the field
rule table and cross-checked against the country/city directory.
"""

__version__ = "0.1.0"
