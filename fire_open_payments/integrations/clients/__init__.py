"""
Integration clients for fire.com: real_http/ for HTTPS calls, mocks/ for offline use.
"""
