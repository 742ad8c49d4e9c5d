"""Core Application Layer: Orchestrates use cases.

Connects the domain layer with the infrastructure layer. Contains the
command handler used by the CLI.
"""
