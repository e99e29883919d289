"""
Contact Form App

Public contact form rendered as a template tag ("shortcode") or an embeddable
block. Submissions are:
- validated and sanitized
- stored in the contact_submissions table
- announced to the site administrator by email
- acknowledged with a one-time notice after the redirect
"""
