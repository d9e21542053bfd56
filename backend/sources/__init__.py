"""
Data acquisition.

Fetches the campus markup from the local archive, the local flat file or the
remote export, in that order, and hands back one payload plus its provenance.
"""
