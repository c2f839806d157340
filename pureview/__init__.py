"""
Pureview - List open GitHub pull requests by user.

A CLI tool that:
1. Searches GitHub for open PRs authored by or assigned to users
2. Groups usernames under reusable aliases
3. Stores credentials locally between invocations

Usage:
    pureview auth <username>      # Authenticate and save credentials
    pureview alias set team a b   # Define an alias
    pureview prs team --both      # Show open PRs for every member
    pureview config get           # Inspect stored configuration
"""

__version__ = "1.0.0"
__author__ = "Pureview"
