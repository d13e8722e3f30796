"""Value rules and the document validator."""
