"""Core data types and helpers for interactive JACO manipulation"""
