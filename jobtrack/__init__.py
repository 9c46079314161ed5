# JobTrack - Job Application Tracker
"""
JobTrack - Track the jobs you applied to.

A small REST API for registering, logging in and managing personal job
records, plus a terminal client backed by a remote-state store.
"""

__version__ = "1.0.0"
__author__ = "JobTrack"
__description__ = "Job application tracking API and client"
