"""Environmental field survey sheets: survey records, report layout and PDF export."""
