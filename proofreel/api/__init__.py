"""
HTTP API for testimonial video generation.
"""
