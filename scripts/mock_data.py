import argparse
import random
from datetime import datetime, timedelta

import numpy as np
import pandas as pd

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

SERVICES = ["30175", "30560", "30172", "30181", "30179", "30066"]
SERVICE_WEIGHTS = [0.35, 0.25, 0.15, 0.12, 0.10, 0.03]

AVAILABLE_CODES = [3, 16]
UNAVAILABLE_CODES = [2, 7, 8, 35, 39, 40, 41, 42, 43, 44, 61, 71]
OTHER_CODES = [1, 5, 12]


def generate_replay_data(start_date_str='2014-01-06', days=20, num_agents=40, seed=None):
    if seed is not None:
        random.seed(seed)
        np.random.seed(seed)

    start_date = datetime.strptime(start_date_str, '%Y-%m-%d')
    end_date = start_date + timedelta(days=days)

    # --- 1. Generate Agent Pool ---
    agent_ids = list(range(1001, 1001 + num_agents))
    agent_skills = {
        agent: set(random.sample(SERVICES[:5], k=random.randint(1, 3)))
        for agent in agent_ids
    }
    busy_until = {agent: start_date for agent in agent_ids}

    # --- 2. Generate Call Arrivals ---
    calls = []
    current = start_date
    while current < end_date:
        hour = current.hour
        weekday = current.weekday()  # 0=Mon, 6=Sun

        # -- TIME OF DAY LOGIC --
        if 9 <= hour <= 17:
            time_weight = 1.0
        elif 8 <= hour <= 20:
            time_weight = 0.4
        else:
            time_weight = 0.02

        # Weekend dampener
        if weekday >= 5:
            time_weight *= 0.2

        base_step_seconds = 60
        step = max(1, np.random.exponential(scale=base_step_seconds / time_weight))
        current += timedelta(seconds=step)
        if current >= end_date:
            break

        service = str(np.random.choice(SERVICES, p=SERVICE_WEIGHTS))
        capable = [a for a in agent_ids if service in agent_skills[a]]

        # --- 3. Match to the first agent to free up ---
        if not capable or random.random() < 0.05:
            calls.append((current, service, None, None, None, None, None))
            continue

        agent = min(capable, key=lambda a: busy_until[a])
        answered = max(current, busy_until[agent]) + timedelta(seconds=int(np.random.exponential(15)))
        if (answered - current).total_seconds() > 900:
            # Caller gave up
            calls.append((current, service, None, None, None, None, None))
            continue

        handle = max(30, int(np.random.normal(240, 90)))
        hangup = answered + timedelta(seconds=handle)
        busy_until[agent] = hangup

        consult = answered + timedelta(seconds=handle // 2) if random.random() < 0.1 else None
        transfer = hangup - timedelta(seconds=5) if random.random() < 0.05 else None
        calls.append((current, service, agent, answered, consult, transfer, hangup))

    # --- 4. Generate Agent Activities (login, breaks, wrap-up) ---
    activities = []
    for day in range(days):
        day_start = start_date + timedelta(days=day)
        if day_start.weekday() >= 5:
            continue
        for agent in agent_ids:
            shift_start = day_start + timedelta(hours=8, minutes=random.randint(0, 90))
            shift_end = shift_start + timedelta(hours=8)
            activities.append((random.choice(AVAILABLE_CODES), agent, shift_start, shift_start + timedelta(minutes=1)))

            # Breaks: the agent is away until the activity ends
            for _ in range(random.randint(1, 3)):
                brk = shift_start + timedelta(minutes=random.randint(60, 420))
                activities.append((random.choice(UNAVAILABLE_CODES), agent, brk, brk + timedelta(minutes=random.randint(5, 30))))

            # Noise codes the replay should ignore
            if random.random() < 0.3:
                misc = shift_start + timedelta(minutes=random.randint(0, 480))
                activities.append((random.choice(OTHER_CODES), agent, misc, misc + timedelta(minutes=2)))

            activities.append((random.choice(UNAVAILABLE_CODES), agent, shift_end, day_start + timedelta(days=1, hours=7)))

    # --- 5. Build DataFrames ---
    def fmt(ts):
        return ts.strftime(TIMESTAMP_FORMAT) if ts is not None else ""

    df_calls = pd.DataFrame(
        [
            {
                "date_received": fmt(arrival),
                "queue_name": service,
                # Agent numbers come out of the source system as decimals
                "agent_number": f"{agent}.0" if agent is not None else "",
                "answered": fmt(answered),
                "consult": fmt(consult),
                "transfer": fmt(transfer),
                "hangup": fmt(hangup),
            }
            for arrival, service, agent, answered, consult, transfer, hangup in calls
        ]
    )

    df_activities = pd.DataFrame(
        [
            {
                "id": code,
                "user_id": agent - 1000,
                "dnd_id": "",
                "campaign_id": random.choice([11, 12, 13]),
                "extension": 2000 + (agent - 1000),
                "last_call_id": "",
                "startdatetime": fmt(start),
                "enddatetime": fmt(end),
                "agent_id": agent,
            }
            for code, agent, start, end in activities
        ]
    )

    return df_calls, df_activities


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Generate mock call-center logs")
    parser.add_argument("--days", type=int, default=20)
    parser.add_argument("--agents", type=int, default=40)
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--calls", type=str, default="calls.csv")
    parser.add_argument("--activities", type=str, default="activities.csv")
    args = parser.parse_args()

    df_calls, df_activities = generate_replay_data(days=args.days, num_agents=args.agents, seed=args.seed)

    df_calls.to_csv(args.calls, index=False)
    df_activities.to_csv(args.activities, index=False)
    print(f"Wrote {len(df_calls)} calls to {args.calls}")
    print(f"Wrote {len(df_activities)} activities to {args.activities}")
