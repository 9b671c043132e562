"""Tests for decorator utilities."""
import pytest
from fxconverter.utils.decorators import retry, log_execution


@pytest.mark.asyncio
async def test_retry_success():
    """Test retry decorator with successful execution."""
    call_count = 0

    @retry(max_attempts=3, delay=0.01)
    async def flaky_function():
        nonlocal call_count
        call_count += 1
        if call_count < 2:
            raise ValueError("Temporary error")
        return "success"

    result = await flaky_function()
    assert result == "success"
    assert call_count == 2


@pytest.mark.asyncio
async def test_retry_failure():
    """Test retry decorator with persistent failure."""
    @retry(max_attempts=3, delay=0.01)
    async def always_fails():
        raise ValueError("Persistent error")

    with pytest.raises(ValueError, match="Persistent error"):
        await always_fails()


@pytest.mark.asyncio
async def test_retry_ignores_other_exceptions():
    call_count = 0

    @retry(max_attempts=3, delay=0.01, exceptions=(TimeoutError,))
    async def wrong_error():
        nonlocal call_count
        call_count += 1
        raise KeyError("not retried")

    with pytest.raises(KeyError):
        await wrong_error()
    assert call_count == 1


@pytest.mark.asyncio
async def test_log_execution():
    """Test log_execution decorator."""
    @log_execution(log_args=True, log_result=True)
    async def logged_function(x, y):
        return x + y

    result = await logged_function(2, 3)
    assert result == 5


@pytest.mark.asyncio
async def test_log_execution_reraises():
    @log_execution()
    async def failing():
        raise RuntimeError("bad")

    with pytest.raises(RuntimeError):
        await failing()

