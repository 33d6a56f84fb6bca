#!/usr/bin/env python3
"""
Smoke test script for the Estately API.
Runs the main browsing, listing and application flows against a live server.

Usage:
    ESTATELY_TOKEN=<access token> python smoke_api.py
"""

import os
import sys
from typing import Optional

import requests

BASE_URL = os.environ.get("ESTATELY_BASE_URL", "http://localhost:8000")
API_BASE = f"{BASE_URL}/api/v1"
TOKEN = os.environ.get("ESTATELY_TOKEN", "")

# Test data
TEST_LISTING = {
    "title": "Smoke Test Cottage",
    "description": "Created by smoke_api.py, safe to delete.",
    "price": 123456,
    "bedrooms": 2,
    "bathrooms": 1,
    "square_feet": 900,
    "images": [],
}

class Colors:
    GREEN = '\033[92m'
    RED = '\033[91m'
    YELLOW = '\033[93m'
    BLUE = '\033[94m'
    END = '\033[0m'

def print_test(name: str):
    print(f"\n{Colors.BLUE}=== {name} ==={Colors.END}")

def print_success(msg: str):
    print(f"{Colors.GREEN}✓ {msg}{Colors.END}")

def print_error(msg: str):
    print(f"{Colors.RED}✗ {msg}{Colors.END}")

def print_info(msg: str):
    print(f"{Colors.YELLOW}ℹ {msg}{Colors.END}")

def check_health() -> bool:
    """Check health endpoints."""
    print_test("Health Checks")
    
    try:
        r = requests.get(f"{BASE_URL}/health")
        assert r.status_code == 200
        data = r.json()
        assert data["status"] == "healthy"
        print_success("GET /health - Detailed health check")
        print_info(f"Data backend: {data.get('data_backend', 'unknown')}")
    except Exception as e:
        print_error(f"GET /health - {str(e)}")
        return False
    
    return True

def check_browsing() -> bool:
    """Browse listings and navigation anonymously."""
    print_test("Browsing")
    
    try:
        r = requests.get(f"{API_BASE}/navigation")
        assert r.status_code == 200
        assert r.json()["authenticated"] is False
        print_success("GET /navigation - Signed-out navigation")
    except Exception as e:
        print_error(f"GET /navigation - {str(e)}")
        return False
    
    try:
        r = requests.get(f"{API_BASE}/properties")
        assert r.status_code == 200
        print_success(f"GET /properties - {r.json()['count']} listings")
    except Exception as e:
        print_error(f"GET /properties - {str(e)}")
        return False
    
    return True

def check_address_search() -> Optional[dict]:
    """Look up an address suggestion. Returns the first candidate."""
    print_test("Address Search")
    
    try:
        r = requests.get(f"{API_BASE}/geocoding/search", params={"q": "10 Downing Street, London"})
        assert r.status_code == 200
        candidates = r.json()["candidates"]
        print_success(f"GET /geocoding/search - {len(candidates)} candidates")
        return candidates[0] if candidates else None
    except Exception as e:
        print_error(f"GET /geocoding/search - {str(e)}")
        return None

def check_listing_flow(candidate: Optional[dict]) -> Optional[str]:
    """Create a listing and read it back. Returns the property id."""
    print_test("Listing Flow")
    headers = {"Authorization": f"Bearer {TOKEN}"}
    
    listing = dict(TEST_LISTING)
    if candidate:
        listing.update(
            address=candidate["label"],
            latitude=candidate["latitude"],
            longitude=candidate["longitude"],
        )
    else:
        listing["address"] = "10 Downing Street, London"
    
    try:
        r = requests.post(f"{API_BASE}/properties", json=listing, headers=headers)
        assert r.status_code == 201, r.text
        property_id = r.json()["id"]
        print_success(f"POST /properties - Created {property_id}")
    except Exception as e:
        print_error(f"POST /properties - {str(e)}")
        return None
    
    try:
        r = requests.get(f"{API_BASE}/properties/{property_id}")
        assert r.status_code == 200
        print_info(f"Location: {r.json().get('location')}")
        print_success("GET /properties/{id} - Details retrieved")
    except Exception as e:
        print_error(f"GET /properties/{{id}} - {str(e)}")
    
    return property_id

def check_applications() -> bool:
    """List applications for the signed-in user."""
    print_test("Applications")
    headers = {"Authorization": f"Bearer {TOKEN}"}
    
    try:
        r = requests.get(f"{API_BASE}/applications", headers=headers)
        assert r.status_code == 200
        data = r.json()
        print_success(f"GET /applications - {len(data['sent'])} sent, {len(data['received'])} received")
    except Exception as e:
        print_error(f"GET /applications - {str(e)}")
        return False
    
    return True

def main():
    """Run all checks."""
    print(f"\n{Colors.BLUE}{'='*60}")
    print("Estately API - Smoke Test")
    print(f"{'='*60}{Colors.END}\n")
    
    print_info(f"Testing against: {BASE_URL}")
    print_info("Make sure the API is running before starting\n")
    
    if not check_health():
        print_error("\nHealth checks failed. Is the API running?")
        sys.exit(1)
    
    if not check_browsing():
        print_error("\nBrowsing failed.")
        sys.exit(1)
    
    candidate = check_address_search()
    
    if not TOKEN:
        print_info("\nESTATELY_TOKEN not set, skipping signed-in flows.")
    else:
        check_listing_flow(candidate)
        check_applications()
    
    print(f"\n{Colors.GREEN}{'='*60}")
    print("Smoke test completed!")
    print(f"{'='*60}{Colors.END}\n")

if __name__ == "__main__":
    main()
