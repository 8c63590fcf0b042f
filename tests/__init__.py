"""
Unit Tests for Chess Analyzer

Running Tests:
    # Run all tests
    pytest tests/

    # Run specific test file
    pytest tests/test_session.py

    # Run with coverage
    pytest tests/ --cov=chess_analyzer --cov-report=html

Dependencies:
    - pytest: Test framework
    - pytest-cov: Coverage reporting
"""
