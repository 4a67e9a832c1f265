"""
Boolean masking components for the masked algebra backend.

Contains:
- gadgets: share splitting/recombination and the DOM-indep AND gadget
"""
