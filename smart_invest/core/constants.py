"""
Core constants and limits.

Defines the fixed strings and ratios used by the ledger and the
recommendation pipeline.
"""

# Transaction reasoning for orders placed by hand
MANUAL_BUY_REASONING = "Manual buy order executed at market price"
MANUAL_SELL_REASONING = "Manual sell order executed at market price"

# Recommendation execution
RECOMMENDATION_CASH_FRACTION = 0.10  # Max share of cash a sized BUY may use

# Recommendation generation
MIN_RECOMMENDATION_SCORE = 60  # Researches below this score are dropped
MAX_RECOMMENDATION_POSITIONS = 8  # Max recommendations per run
COMPANY_SEARCH_LIMIT = 15  # Candidate symbols requested per run
MAX_REASONING_LENGTH = 500  # Characters kept in recommendation reasoning
REASONING_EXCERPT_LENGTH = 400  # Analysis excerpt used by the fallback summary

# Research scores
MIN_SCORE = 0
MAX_SCORE = 100

# Market data
PRICE_SOURCE_YAHOO = "Yahoo Finance"
QUOTE_TIMEOUT_SECONDS = 10.0
BATCH_TIMEOUT_SECONDS = 15.0
FALLBACK_REQUEST_DELAY_SECONDS = 0.1  # Pause between per-symbol fallback requests
