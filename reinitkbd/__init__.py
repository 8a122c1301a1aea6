"""reinitkbd — re-apply keyboard settings whenever a keyboard is attached."""
