"""Tests for the Kodi client."""
