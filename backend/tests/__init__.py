"""
TrainForge Test Suite

Test Structure:
    tests/
    ├── conftest.py          # Shared fixtures and configuration
    └── unit/                # Unit tests (no network, SQLite in memory)
        ├── test_text_extraction.py
        ├── test_content_analysis.py
        ├── test_quiz_generation.py
        ├── test_module_pipeline.py
        ├── test_review_suggestions.py
        ├── test_llm_client.py
        ├── test_uploads.py
        └── test_modules_api.py

Running Tests:
    # Run all tests
    pytest backend/tests/ -v

    # Run with coverage
    pytest backend/tests/ --cov=trainforge --cov-report=html
"""
