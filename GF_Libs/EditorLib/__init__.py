"""EditorLib - PyQt5 host window for the masking session."""
