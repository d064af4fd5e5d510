"""Terminal and HTML presentation of listing and detail pages."""
