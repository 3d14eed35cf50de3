"""
Unit Tests for chess_analysis

Most tests drive the engine layer through ScriptedTransport
(tests/engine_fakes.py), so Stockfish is not needed. Tests that talk to
a real engine skip themselves when no binary is installed.

Running Tests:
    # Run all tests
    pytest tests/

    # Run specific test file
    pytest tests/test_client.py

    # Run with coverage
    pytest tests/ --cov=chess_analysis --cov-report=html

Dependencies:
    - pytest: Test framework
    - pytest-cov: Coverage reporting
"""
