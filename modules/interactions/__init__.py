"""Discord slash-command interactions over HTTP."""
