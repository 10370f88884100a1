"""BMS Django applications."""
