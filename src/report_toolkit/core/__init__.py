"""
Module: core

Purpose:
    Data models and report descriptions shared by the builder and CLI.
"""
