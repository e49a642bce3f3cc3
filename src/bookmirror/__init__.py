# ABOUTME: bookmirror mirrors a Calibre-style library into a flat, series-aware layout.
# ABOUTME: Books are hardlinked, so the mirror uses no additional disk space.
