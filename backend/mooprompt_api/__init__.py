"""
MooPrompt REST API: restaurant POS and FlowTrak work tracking.
"""
