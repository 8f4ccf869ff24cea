"""Collections report pipeline: canonical contact views and operational reports."""
