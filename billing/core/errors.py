from __future__ import annotations


class InvoiceError(Exception):
	"""Base class for invoice generation failures."""


class ValidationError(InvoiceError, ValueError):
	"""Raised when invoice input cannot be turned into a renderable document.

	Surfaced before any layout work starts; no partial document is produced.
	"""


class ResourceLoadError(InvoiceError):
	"""A logo or font could not be read or decoded. Always recovered locally."""


class SerializationError(InvoiceError):
	"""Writing the laid-out pages to PDF bytes failed."""
