"""
Property Transaction History - resolve a property address into its sale history.

The lookup maps the ZIP code to its town and county, finds the town's assessor
page for the address with a web search, and has a language model read the
Ownership History table off that page.
"""
