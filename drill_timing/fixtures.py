"""
Test Fixtures - Predefined drill snapshots for testing.

These drills can be used to:
1. Exercise the optimizer without the editor
2. Validate the schema
3. Serve as sample payloads for the HTTP service
"""


def make_action(type, start, end, **extra):
    """Straight action in the editor's wire format, with auto events"""
    action = {
        "id": extra.pop("id", f"{type}-{start[0]}-{start[1]}"),
        "type": type,
        "startX": start[0],
        "startY": start[1],
        "endX": end[0],
        "endY": end[1],
        "config": {"preEvent": "auto", "postEvent": "auto"},
        "pathType": "straight",
        "points": [],
        "sceneIndex": 0,
    }
    action.update(extra)
    return action


def make_player(id, actions, has_ball=False, team="A"):
    x, y = (actions[0]["startX"], actions[0]["startY"]) if actions else (0, 0)
    return {
        "id": id,
        "x": x,
        "y": y,
        "initialX": x,
        "initialY": y,
        "number": id,
        "hasBall": has_ball,
        "team": team,
        "actions": actions,
    }


# ============================================================
# EXAMPLE DRILLS
# ============================================================

# Long pass to a player who only needs a short run to reach the ball
PASS_AND_RUN = {
    "players": [
        make_player("passer", [
            make_action("pass", (-164, -86.5), (208, -87.5)),
        ], has_ball=True),
        make_player("receiver", [
            make_action("run", (199, -11.5), (210, -88.5)),
            make_action("dribble", (210, -88.5), (310, 17.5)),
        ]),
    ]
}


LONE_RUN = {
    "players": [
        make_player("p1", [
            make_action("run", (0, 0), (100, 0)),
        ]),
    ]
}


# A1 passes to A2, A2 dribbles and passes back to A1's overlapping run
ONE_TWO = {
    "players": [
        make_player("A1", [
            make_action("pass", (0, 0), (200, 0)),
            make_action("run", (0, 0), (300, 150)),
            make_action("shoot", (300, 150), (300, 400)),
        ], has_ball=True),
        make_player("A2", [
            make_action("run", (200, 100), (200, 5)),
            make_action("dribble", (200, 5), (250, 40)),
            make_action("pass", (250, 40), (300, 140)),
        ]),
        make_player("D1", [
            make_action("turn", (150, 200), (150, 200)),
            make_action("run", (150, 200), (150, 400)),
        ], team="B"),
    ]
}


# Each player passes to the other's first run end: sync edges form a cycle
MUTUAL_PASSES = {
    "players": [
        make_player("A", [
            make_action("run", (0, 0), (0, 100)),
            make_action("pass", (0, 100), (500, 100)),
        ], has_ball=True),
        make_player("B", [
            make_action("run", (500, 0), (500, 100)),
            make_action("pass", (500, 100), (0, 100)),
        ], has_ball=True),
    ]
}


PINNED_RECEIVER = {
    "players": [
        make_player("passer", [
            make_action("pass", (-164, -86.5), (208, -87.5)),
        ], has_ball=True),
        make_player("receiver", [
            make_action("run", (199, -11.5), (210, -88.5), speed=40,
                        config={"preEvent": "immediate", "postEvent": "wait:1"}),
        ]),
    ]
}


ALL_FIXTURES = {
    "pass_and_run": PASS_AND_RUN,
    "lone_run": LONE_RUN,
    "one_two": ONE_TWO,
    "mutual_passes": MUTUAL_PASSES,
    "pinned_receiver": PINNED_RECEIVER,
}
