"""Memreport text parsing.

Submodules:
  patterns   -- regex helpers and fixed line shapes
  detection  -- engine version detection from report content
  columns    -- table line to cell splitting
  schema     -- ParsedTable / ParsedSection / ParsedDocument models
  document   -- DocumentParser, the section and table extractor
"""
