"""Leave Tracker package.

Organized by feature modules (users, leaves) with a thin Flask controller
layer over service/repository layers. The leave lifecycle, access policy
and reporting in ``leaves`` are pure and do not touch the database.
"""
