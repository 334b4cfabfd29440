"""
C# Concrete Syntax Tree (CST) Data Structures.

This package provides a pure Python representation of C# code designed to
preserve formatting (whitespace, comments, directives) for lossless round-trip
transformations.
"""
