"""Command-line front end for compiler-bench."""
