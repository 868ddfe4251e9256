"""
Catalog App - Work Categories and Lookup Values

Work categories form stage pipelines (harvesting → packing → shipping) by
pointing at the next category, and each category owns the priced rates that
can be selected for a work assignment. The app also holds the flat lookup
lists (payment groups, crop types, work types) used by the other apps.
"""
