"""
ProofReel - testimonial video generation from approved customer reviews.

One review in, several short angle-specific videos out:
review -> consent check -> narrative script -> voiceover -> AI video job -> artifact.
"""

__version__ = "1.0.0"
