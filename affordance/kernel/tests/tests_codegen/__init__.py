"""
Affordance Codegen Test Suite

Tests for config materialization: literal rendering, module output and the
conditional file writer.

Test Files:
1. test_codegen_serialize.py - Python literal rendering, quoting, layout
2. test_codegen_output.py - Module layout, full vs diff mode, round trip
3. test_codegen_writer.py - Write-only-if-changed, created / updated / unchanged
"""
