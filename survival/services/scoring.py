# survival/services/scoring.py
"""
夜ごとの得点集計。

ルーター側で DB から読み込んだ行（Night / Player / Vote / ManualVote）を受け取り、
PlayerSummaryOut / NightSummaryOut を組み立てるだけの純粋関数群。
DB への書き込みや例外は一切発生しない。
"""

from collections import Counter
from typing import Iterable, Sequence

from ..models.night import Night
from ..models.player import Player
from ..models.vote import ManualVote, Vote
from ..schemas.summary import NightSummaryOut, PlayerSummaryOut, TotalSummaryOut
from ..schemas.vote import vote_to_out

LEADERBOARD_SIZE = 3


def n_largest(items: Iterable[int], n: int) -> list[int]:
    """重複をまとめ、0 を除いた上で大きい順に n 件"""
    return sorted({x for x in items if x != 0}, reverse=True)[:n]


def n_smallest(items: Iterable[int], n: int) -> list[int]:
    """重複をまとめ、0 を除いた上で小さい順に n 件"""
    return sorted({x for x in items if x != 0})[:n]


def get_continuous_runs(numbers: Iterable[int]) -> list[list[int]]:
    """
    昇順に並べて、1 ずつ連続する区間ごとに分割する。
    例: [5, 1, 2, 4] -> [[1, 2], [4, 5]]
    """
    runs: list[list[int]] = []
    current: list[int] = []

    for n in sorted(numbers):
        if not current or n == current[-1] + 1:
            current.append(n)
        else:
            runs.append(current)
            current = [n]

    if current:
        runs.append(current)

    return runs


def no_vote_points(
    night_ids: Iterable[int],
    voted_night_ids: Iterable[int],
    night_id: int,
) -> list[list[int]]:
    """
    投票しなかった夜の連続区間ごとに、各夜のペナルティを返す。

    区間の先頭から数えて k 番目（0 始まり）の夜は 2 ** (k - 2) を整数に切り捨てた値。
    つまり 1 区間は 0, 0, 1, 2, 4, 8, ... と増えていく。
    """
    missed = {n for n in night_ids if n <= night_id} - set(voted_night_ids)
    runs = get_continuous_runs(missed)
    return [[int(2.0 ** (n - run[0] - 2)) for n in run] for run in runs]


def no_vote_today(points: Sequence[Sequence[int]], voted_today: bool) -> int:
    if voted_today or not points:
        return 0
    return points[-1][-1]


def no_vote_total(points: Sequence[Sequence[int]]) -> int:
    return sum(sum(run) for run in points)


def build_player_summary(
    player: Player,
    night: Night,
    votes: Sequence[Vote],
    manual_votes: Sequence[ManualVote],
    nights: Sequence[Night],
) -> PlayerSummaryOut:
    """
    1 プレイヤーの、指定した夜時点での集計。

    - today : その夜の有効票ポイント + 手動ポイント + 未投票ペナルティ
    - total : その夜までに受けた全票のポイント（is_active は見ない）+ 未投票ペナルティ累計
    """
    votes_for = [
        v for v in votes
        if v.night_id == night.id and v.for_player_id == player.id
    ]
    voted_nights = {v.night_id for v in votes if v.by_player_id == player.id}

    choices = Counter(v.choice.points for v in votes_for)
    players_count = len({v.by_player_id for v in votes_for})

    nv_points = no_vote_points((n.id for n in nights), voted_nights, night.id)
    nv_today = no_vote_today(nv_points, night.id in voted_nights)
    nv_total = no_vote_total(nv_points)

    manual = sum(
        m.points for m in manual_votes
        if m.for_player_id == player.id and m.night_id == night.id
    )
    today_raw = sum(v.choice.points for v in votes_for if v.is_active)
    # ★ total は無効票も含めて数える（today は有効票のみ）
    total_raw = sum(
        v.choice.points for v in votes
        if v.for_player_id == player.id and v.night_id <= night.id
    )

    return PlayerSummaryOut(
        id=player.discord_id,
        died_on=player.died_on,
        today=today_raw + manual + nv_today,
        manual=manual,
        no_votes=nv_today,
        choices=dict(choices),
        players=players_count,
        total=total_raw + nv_total,
        votes=[vote_to_out(v) for v in votes_for],
    )


def build_night_summary(
    night: Night,
    players: Sequence[Player],
    votes: Sequence[Vote],
    manual_votes: Sequence[ManualVote],
    nights: Sequence[Night],
) -> NightSummaryOut:
    """
    その夜に生存していた全プレイヤーの集計と、指標ごとの上位3件。
    """
    alive = sorted(
        (p for p in players if p.alive_on(night.id)),
        key=lambda p: p.name,
    )

    summary: dict[str, PlayerSummaryOut] = {}
    a_today: list[int] = []
    a_manual: list[int] = []
    a_no_votes: list[int] = []
    a_choices: dict[int, list[int]] = {}
    a_players: list[int] = []
    a_total: list[int] = []

    for player in alive:
        s = build_player_summary(player, night, votes, manual_votes, nights)

        for points, count in s.choices.items():
            a_choices.setdefault(points, []).append(count)

        a_today.append(s.today)
        a_manual.append(s.manual)
        a_no_votes.append(s.no_votes)
        a_players.append(s.players)
        a_total.append(s.total)

        summary[player.name] = s

    total = TotalSummaryOut(
        today=n_largest(a_today, LEADERBOARD_SIZE),
        manual=n_largest(a_manual, LEADERBOARD_SIZE),
        no_votes=n_largest(a_no_votes, LEADERBOARD_SIZE),
        choices={k: n_largest(v, LEADERBOARD_SIZE) for k, v in a_choices.items()},
        players=n_largest(a_players, LEADERBOARD_SIZE),
        total=n_largest(a_total, LEADERBOARD_SIZE),
    )

    # 死亡者は alive の時点で除外済みなので、ここは常に空
    return NightSummaryOut(summary=summary, total=total, dead=[])
