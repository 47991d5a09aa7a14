"""Detection of concealed, auto-fillable form fields in web pages."""

__version__ = "0.1.0"
