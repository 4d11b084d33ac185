from crew_sync.merger import identity_key, merge_applications

PRO_CREW = "Film Crew: Professionals"
SUP_CREW = "Film Crew: General Support"


def test_identity_key(make_raw_app):
    assert identity_key(make_raw_app()) == "Ada Lovelace - ada@example.com - (503) 555-1234"


def test_merge_professionals_first_keeps_pro_base(make_raw_app):
    pro = make_raw_app(Rank="1", Crew=PRO_CREW, Status="accepted")
    sup = make_raw_app(Rank="2", Crew=SUP_CREW, Status="pending")
    merged = merge_applications([pro, sup])
    assert len(merged) == 1
    app = merged[0]
    assert app["Crew"] == {1: PRO_CREW, 2: SUP_CREW}
    assert app["Rank"] is None
    assert app["Status"] == "accepted"


def test_merge_takes_incoming_base_when_first_crew_is_not_professionals(make_raw_app):
    sup = make_raw_app(Rank="1", Crew=SUP_CREW, Status="pending")
    pro = make_raw_app(Rank="2", Crew=PRO_CREW, Status="accepted")
    app = merge_applications([sup, pro])[0]
    assert app["Status"] == "accepted"
    assert app["Crew"] == {1: SUP_CREW, 2: PRO_CREW}


def test_merge_incoming_wins_rank_collision(make_raw_app):
    a = make_raw_app(Rank="1", Crew=SUP_CREW)
    b = make_raw_app(Rank="1", Crew=PRO_CREW)
    assert merge_applications([a, b])[0]["Crew"] == {1: PRO_CREW}


def test_merge_is_case_sensitive_and_keeps_first_seen_order(make_raw_app):
    a = make_raw_app(**{"Email Address": "ada@example.com"})
    b = make_raw_app(**{"First Name": "Grace", "Last Name": "Hopper", "Email Address": "grace@example.com"})
    c = make_raw_app(**{"Email Address": "ADA@example.com"})
    d = make_raw_app(**{"Email Address": "ada@example.com", "Rank": "2", "Crew": SUP_CREW})
    merged = merge_applications([a, b, c, d])
    assert [m["Email Address"] for m in merged] == ["ada@example.com", "grace@example.com", "ADA@example.com"]
    assert merged[0]["Crew"] == {1: PRO_CREW, 2: SUP_CREW}


def test_merge_does_not_mutate_input(make_raw_app):
    a = make_raw_app()
    merge_applications([a])
    assert a["Crew"] == PRO_CREW
    assert a["Rank"] == "1"


def test_merge_keeps_professionals_base_when_it_is_the_lowest_rank(make_raw_app):
    records = [
        make_raw_app(Rank="2", Crew=SUP_CREW, Status="sup-first"),
        make_raw_app(Rank="1", Crew=PRO_CREW, Status="pro"),
        make_raw_app(Rank="3", Crew=SUP_CREW, Status="sup-again"),
    ]
    app = merge_applications(records)[0]
    assert app["Status"] == "pro"
    assert app["Crew"] == {1: PRO_CREW, 2: SUP_CREW, 3: SUP_CREW}
