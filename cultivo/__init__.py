"""Cultivo: conversational knowledge cultivation over NARS-style truth values."""
