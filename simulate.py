"""
Simple simulation script against a running server.
"""

import requests
import random
import time
import sys


def main():
    BASE_URL = "http://localhost:8000/api"
    NUM_USERS = 5
    NUM_SUBMISSIONS = 40

    print("=== Leaderboard Simulation ===\n")

    games = requests.get(f"{BASE_URL}/games").json()
    if not games:
        print("X No games seeded, run migrate.py first")
        sys.exit(1)
    print(f"Found {len(games)} games")

    # Register users; each keeps its own cookie jar
    print(f"\nRegistering {NUM_USERS} users...")
    sessions = {}
    stamp = int(time.time()) % 100000
    for i in range(NUM_USERS):
        session = requests.Session()
        username = f"sim{i}_{stamp}"
        response = session.post(
            f"{BASE_URL}/auth/register",
            json={"username": username, "email": f"{username}@example.com", "password": "secret123"}
        )
        if response.status_code == 200:
            sessions[username] = session
            print(f"  Registered {username} (ID: {response.json()['id']})")
        else:
            print(f"  Failed to register {username}: {response.text}")

    if not sessions:
        print("X Need at least 1 user")
        sys.exit(1)

    # Submit random scores; lower ones are expected to bounce
    print(f"\nSubmitting {NUM_SUBMISSIONS} scores...")
    accepted = rejected = 0
    for _ in range(NUM_SUBMISSIONS):
        username = random.choice(list(sessions))
        game = random.choice(games[:8])
        score = random.randint(100, 2000)

        response = sessions[username].post(
            f"{BASE_URL}/scores",
            json={"game_id": game["id"], "score": score}
        )
        result = response.json()
        if response.status_code == 200:
            accepted += 1
            if result.get("new_leader"):
                if result.get("is_first_leader"):
                    print(f"  {username} is the first champion of {result['game_name']} ({score})")
                else:
                    print(f"  {username} dethroned {result['previous_leader']} in {result['game_name']} ({score})")
        else:
            rejected += 1

    print(f"\nAccepted {accepted}, rejected {rejected}")

    # Get API leaderboard
    print("\nAPI Leaderboard (Top 3):")
    response = requests.get(f"{BASE_URL}/leaderboard")
    if response.status_code == 200:
        for entry in response.json()[:3]:
            print(f"  {entry['rank']}. {entry['username']}: {entry['game_count']} games, "
                  f"{entry['total_score']} total, best at {entry['best_game']}")

    print("\nChampions:")
    response = requests.get(f"{BASE_URL}/leaderboard", params={"userChampions": "true"})
    if response.status_code == 200:
        for entry in response.json():
            print(f"  {entry['username']} leads {entry['games_led']}: {', '.join(entry['leading_games'])}")

    print("\n Simulation complete!")


if __name__ == "__main__":
    main()
