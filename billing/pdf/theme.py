# billing/pdf/theme.py
# ===== Layout constants (tweak here) =====
from reportlab.lib.pagesizes import A4

PAGE_WIDTH, PAGE_HEIGHT = A4

MARGIN_X = 50

# Footer band drawn at the bottom of every page, and the space reserved for it
FOOTER_BAND_HEIGHT = 60
FOOTER_HEIGHT = 80
# Lowest baseline content may use before spilling to a new page
MIN_CONTENT_Y = FOOTER_HEIGHT + 20

# First baseline on continuation pages (before the repeated column header)
CONTINUATION_TOP_Y = PAGE_HEIGHT - 80

# Column header band
COLUMN_HEADER_HEIGHT = 28
COLUMN_HEADER_ADVANCE = 45

# Line items
ITEM_TITLE_X = 60
ITEM_TEXT_X = 75
BULLET = "•"
BULLET_INDENT = 9
AMOUNT_RIGHT_X = PAGE_WIDTH - 60
TITLE_MAX_WIDTH = PAGE_WIDTH - ITEM_TITLE_X - 170
DETAIL_MAX_WIDTH = 380

TITLE_SIZE = 11
DESCRIPTION_SIZE = 9
DETAIL_SIZE = 8.5

TITLE_LINE_HEIGHT = 20
TITLE_CONTINUATION_HEIGHT = 14
DESCRIPTION_LINE_HEIGHT = 16
DETAIL_LINE_HEIGHT = 13
ITEM_PADDING = 15
SEPARATOR_GAP = 18
CONTINUED_LINE_HEIGHT = 16

# Totals
TOTALS_GAP = 35
TOTALS_BOX_HEIGHT_FULL = 120
TOTALS_BOX_HEIGHT_COMPACT = 60
TOTALS_BOX_WIDTH = 220
TOTALS_LABEL_X = PAGE_WIDTH - 250
TOTALS_VALUE_RIGHT_X = PAGE_WIDTH - 70
TOTALS_ROW_HEIGHT = 20

# PAID stamp
STAMP_CENTER_X = 120
STAMP_WIDTH = 90
STAMP_HEIGHT = 35
STAMP_SIZE = 24

# Notes
NOTES_GAP = 40
NOTES_LINE_HEIGHT = 12

# Colors (RGB 0..1)
BRAND = (0.05, 0.05, 0.15)
ACCENT = (0.4, 0.45, 0.95)
TEXT_PRIMARY = (0.15, 0.15, 0.2)
TEXT_SECONDARY = (0.5, 0.52, 0.55)
LINE_COLOR = (0.93, 0.94, 0.95)
BG_LIGHT = (0.98, 0.98, 0.99)
WHITE = (1.0, 1.0, 1.0)
FOOTER_MUTED = (0.7, 0.7, 0.7)
FOOTER_NUMBER = (0.6, 0.6, 0.6)
