"""Mapper: rule-based field mapping over a flat document.

- values.py / fields.py: Value variant and flat field store
- rules.py: mapping rules (ordered fallback chains of candidate mappings)
- strategies.py: Direct, Transform, Aggregate (concatenate/sum), Split
- engine.py: applies a rule list to a document, first applicable candidate wins
"""
