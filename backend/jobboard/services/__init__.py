"""
Domain services for the job board: listing, submission, poster management,
applications, the question builder and the external integrations they use.
"""
