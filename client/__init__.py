"""Client-side cover generator: request lifecycle, compositing and download."""
