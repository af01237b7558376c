"""Small helpers shared by the session tests."""


def hold_still(s):
    """Point at the ship and stop it so steering leaves it in place."""
    s.player.vx = s.player.vy = 0.0
    s.controls.target_x = s.player.x
    s.controls.target_y = s.player.y
    s.controls.fire = False


def move_player(s, x, y):
    s.player.x, s.player.y = x, y
    hold_still(s)
