"""BMS Django project configuration package."""
