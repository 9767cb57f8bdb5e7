#!/usr/bin/env python3
"""
Seed script — creates a small dataset for trying the feed and comments.

Creates:
  • 8 users
  • A follow graph (each user follows 3 others)
  • 3 image posts per user
  • Random likes and a few comments

Run against a running API:
  python scripts/seed_data.py --api-url http://localhost:8000

All IDs are printed so you can use them in curl commands.
"""
import argparse
import base64
import json
import random
import time
import urllib.request
import urllib.error
from dataclasses import dataclass
from typing import Optional


BASE_USERS = [
    ("ms_rivera", "Ana Rivera"),
    ("growth_gabe", "Gabe Ortiz"),
    ("studio_oak", "Priya Nair"),
    ("dr_okafor", "Chidi Okafor"),
    ("lin_draws", "Lin Zhao"),
    ("coach_maya", "Maya Brooks"),
    ("archi_tom", "Tom Becker"),
    ("nurse_jo", "Jo Adams"),
]

SAMPLE_CAPTIONS = [
    "Sunset over the harbour after a long week.",
    "New lesson plan on fractions is ready for Monday.",
    "Spring campaign banner, take three.",
    "Floor plan sketch for the Maple House renovation.",
    "Reading nook finally finished. Worth every weekend.",
    "Flu season chart for the clinic newsletter.",
    "Quiz night with the biology club!",
    "First coffee, then landing page copy.",
    "Site visit: the light in this atrium is unreal.",
    "Prepping the asthma guide for the waiting room.",
]

SAMPLE_COMMENTS = [
    "Love this!",
    "Beautiful!",
    "Can you share the template?",
    "So good.",
    "Where was this taken?",
]

# 1x1 transparent PNG
PIXEL_PNG = base64.b64encode(
    bytes.fromhex(
        "89504e470d0a1a0a0000000d4948445200000001000000010806000000"
        "1f15c4890000000d49444154789c63f8ffff3f0005fe02fea7d6a4"
        "0000000049454e44ae426082"
    )
).decode()


@dataclass
class ApiClient:
    base_url: str

    def post(self, path: str, data: dict, user_id: Optional[str] = None) -> dict:
        url = f"{self.base_url}{path}"
        body = json.dumps(data).encode()
        headers = {"Content-Type": "application/json"}
        if user_id:
            headers["X-User-Id"] = user_id
        req = urllib.request.Request(url, data=body, headers=headers, method="POST")
        try:
            with urllib.request.urlopen(req, timeout=10) as resp:
                raw = resp.read()
                return json.loads(raw) if raw else {}
        except urllib.error.HTTPError as e:
            body = e.read().decode()
            print(f"  HTTP {e.code} on POST {path}: {body}")
            return {}

    def get(self, path: str) -> dict:
        url = f"{self.base_url}{path}"
        req = urllib.request.Request(url, method="GET")
        try:
            with urllib.request.urlopen(req, timeout=10) as resp:
                return json.loads(resp.read())
        except urllib.error.HTTPError as e:
            print(f"  HTTP {e.code} on GET {path}")
            return {}


def wait_for_api(client: ApiClient, retries: int = 15) -> None:
    print(f"Waiting for API at {client.base_url} ...")
    for _ in range(retries):
        try:
            if client.get("/health").get("status") == "ok":
                print("  API is ready!\n")
                return
        except (urllib.error.URLError, OSError):
            pass
        time.sleep(3)
    raise RuntimeError(f"API not reachable at {client.base_url} after {retries} retries")


def main(api_url: str) -> None:
    client = ApiClient(api_url)
    wait_for_api(client)

    # ── Create users ─────────────────────────────────────────────────────
    print("Creating users...")
    user_ids: list[str] = []
    for username, name in BASE_USERS:
        uid = client.post("/users/", {"username": username, "name": name}).get("id", "")
        if uid:
            user_ids.append(uid)
            print(f"  ✓ {username} ({uid})")
        else:
            print(f"  ✗ Failed to create {username}")

    if not user_ids:
        print("No users created — aborting")
        return

    # ── Create follow graph ───────────────────────────────────────────────
    print("\nCreating follow relationships...")
    for follower_id in user_ids:
        others = [u for u in user_ids if u != follower_id]
        for followee_id in random.sample(others, k=min(3, len(others))):
            client.post("/users/follow", {"follower_id": follower_id, "followee_id": followee_id})
    print("  ✓ Follow graph created")

    # ── Create posts ──────────────────────────────────────────────────────
    print("\nCreating posts...")
    post_ids: list[str] = []
    captions = random.sample(SAMPLE_CAPTIONS, k=len(SAMPLE_CAPTIONS)) * 3
    for i, user_id in enumerate(user_ids):
        for j in range(3):
            result = client.post(
                "/posts/",
                {
                    "caption": captions[(i * 3 + j) % len(captions)],
                    "image_base64": PIXEL_PNG,
                    "image_content_type": "image/png",
                },
                user_id=user_id,
            )
            if result.get("success"):
                post_ids.append(result["post_id"])
    print(f"  ✓ {len(post_ids)} posts created")

    # ── Likes and comments ────────────────────────────────────────────────
    print("\nAdding likes and comments...")
    likes = comments = 0
    for post_id in post_ids:
        for user_id in random.sample(user_ids, k=random.randint(0, 4)):
            if client.post(f"/posts/{post_id}/like", {}, user_id=user_id).get("success"):
                likes += 1
        if random.random() < 0.5:
            commenter = random.choice(user_ids)
            content = random.choice(SAMPLE_COMMENTS)
            if client.post(f"/posts/{post_id}/comments", {"content": content}, user_id=commenter):
                comments += 1
    print(f"  ✓ {likes} likes, {comments} comments added")

    # ── Print summary ─────────────────────────────────────────────────────
    print("\n" + "=" * 60)
    print("Seed complete! Here are some commands to try:\n")
    u = user_ids[0]
    print(f"# Get the feed for user '{BASE_USERS[0][0]}':")
    print(f"  curl -s -H 'X-User-Id: {u}' '{api_url}/feed/' | python3 -m json.tool\n")
    print("# Generate a quiz:")
    print(f"  curl -s -X POST '{api_url}/generate/education/quiz' \\")
    print("    -H 'Content-Type: application/json' \\")
    print("    -d '{\"title\": \"Cells\", \"subject\": \"Biology\", "
          "\"description\": \"Organelles and their functions\"}' | python3 -m json.tool\n")
    print("# Check Jaeger traces: http://localhost:16686")
    print(f"# Check Prometheus metrics: {api_url}/metrics")
    print("=" * 60)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed the Industry Studio API")
    parser.add_argument("--api-url", default="http://localhost:8000", help="API base URL")
    args = parser.parse_args()
    main(args.api_url)
