#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Turn item codes from text, files or photos into a paginated barcode PDF.
"""

import sys

import barcode_sheet_maker.cli


if __name__ == "__main__":
	sys.exit(barcode_sheet_maker.cli.main())
