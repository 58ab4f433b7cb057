"""Domain services and the request pipeline."""
