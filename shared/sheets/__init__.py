"""Google Sheets access: remote fetch, Redis read-through cache and row mapping."""
