"""Form page, preview/download routes and HTML templates."""
