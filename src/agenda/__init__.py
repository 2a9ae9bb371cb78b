"""Agenda Maceió: browse and filter the city's events directory."""
