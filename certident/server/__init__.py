"""Server-side helpers: status errors, version info and request size limits."""