"""Template intent model and normalization.

The template layer describes what a business user wants to send (a loose "intent") and prepares it
for the document builder, which compiles it into the platform's strict wire schema.
"""
