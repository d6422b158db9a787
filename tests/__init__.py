"""
Tests Package - Unit Tests

Test structure:
- tests/conftest.py - Shared pytest fixtures (queue files, fake submitter)
- tests/test_*.py - One module per component

Run with: pytest
"""
