"""
LayerLine Test Suite

Tests for:
- Time range math and layer models
- Group flattening
- Track allocation
- Layout building (breakpoints, passthrough/transition ranges)
- Instruction generation
- End-to-end layout scenarios and invariants

Run tests with:
    pytest tests/ -v
"""
