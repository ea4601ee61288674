import io
import math
import unittest
from unittest import mock

from lox.lang.callable import LoxFunction, NativeFunction
from lox.lang.error import LoxRuntimeError
from lox.lang.interpreter import COMPLETED, ExecutionOutcome, Interpreter
from lox.syntax.parser import ParseStatus, Parser, parse
from lox.syntax.scanner import scan


def evaluate(source, interpreter=None):
    tokens, __ = scan(source)
    parser = Parser(tokens)
    expr = parser.parse_expression()
    assert not parser.errors, parser.errors
    return (interpreter or Interpreter()).evaluate(expr)


def run(source, interpreter=None):
    """Runs source and returns the printed lines."""
    out = io.StringIO()
    interpreter = interpreter or Interpreter()
    interpreter.stdout = out

    statements, status = parse(scan(source)[0])
    assert status is ParseStatus.SUCCESS, source
    interpreter.interpret(statements)
    return out.getvalue().splitlines()


class ExpressionTestCase(unittest.TestCase):

    def test_arithmetic(self):
        cases = {
            "1+2*3": 7.0,
            "(1+2)*3": 9.0,
            "10 - 4 - 3": 3.0,
            "7 / 2": 3.5,
            "-(2 + 3)": -5.0,
            "--1": 1.0,
            '"a" + "b"': "ab",
            '"" + ""': "",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, evaluate(case), case)

    def test_comparison_and_equality(self):
        cases = {
            "nil == nil": True,
            "nil == false": False,
            "nil != false": True,
            "1 == 1": True,
            '1 == "1"': False,
            '"a" == "a"': True,
            "true == 1": False,
            "false == false": True,
            "1 < 2": True,
            "2 <= 2": True,
            "3 > 4": False,
            "3 >= 3": True,
            "!nil": True,
            "!0": False,
            '!""': False,
            "!true": False,
        }
        for case, expected in cases.items():
            self.assertIs(expected, evaluate(case), case)

    def test_logical_returns_operands(self):
        cases = {
            '"hi" or 2': "hi",
            "nil or \"yes\"": "yes",
            "false and 1": False,
            "1 and 2": 2.0,
            "nil and undefined": None,    # right side never evaluated
            "true or undefined": True,
        }
        for case, expected in cases.items():
            self.assertEqual(expected, evaluate(case), case)

    def test_type_errors(self):
        cases = {
            '"a" + 1': "Operands must be two numbers or two strings.",
            "1 + nil": "Operands must be two numbers or two strings.",
            '1 - "a"': "Operands must be numbers.",
            "true * 2": "Operands must be numbers.",
            '"a" < "b"': "Operands must be numbers.",
            '-"a"': "Operand must be a number.",
            "-nil": "Operand must be a number.",
        }
        for case, message in cases.items():
            with self.assertRaises(LoxRuntimeError) as ctx:
                evaluate(case)
            self.assertEqual(message, ctx.exception.message, case)
            self.assertEqual(1, ctx.exception.line, case)

    def test_division_by_zero(self):
        self.assertEqual(math.inf, evaluate("1 / 0"))
        self.assertEqual(-math.inf, evaluate("-1 / 0"))
        self.assertTrue(math.isnan(evaluate("0 / 0")))

    def test_stringify(self):
        cases = {
            "7": "7",
            "2.5": "2.5",
            "-0": "-0",
            "10 / 4": "2.5",
            "1 / 3": "0.3333333333333333",
            "10000000000000000": "10000000000000000",
            "0.0000001": "0.0000001",
            "123456789012345678901234": "123456789012345690000000",
            "-2.5 * 1000000000000000000": "-2500000000000000000",
            "1 / 0": "inf",
            "-1 / 0": "-inf",
            "0 / 0": "NaN",
            "nil": "nil",
            "true": "true",
            '"raw string"': "raw string",
            "clock": "<native fn>",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, Interpreter.stringify(evaluate(case)), case)

    def test_undefined_variable(self):
        with self.assertRaises(LoxRuntimeError) as ctx:
            evaluate("nope")
        self.assertEqual("Undefined variable 'nope'.", ctx.exception.message)


class StatementTestCase(unittest.TestCase):

    def test_print_and_vars(self):
        cases = {
            "print 1 + 2;": ["3"],
            "var a; print a;": ["nil"],
            "var a = 1; a = a + 1; print a;": ["2"],
            "var a = 1; print a = 5; print a;": ["5", "5"],
            'var s = "x"; var s = s + "y"; print s;': ["xy"],
            "print true and false;": ["false"],
        }
        for case, expected in cases.items():
            self.assertEqual(expected, run(case), case)

    def test_blocks_and_shadowing(self):
        self.assertEqual(["1"], run("var x = 1; { var x = 2; } print x;"))
        self.assertEqual(["2", "1"], run("var x = 1; { var x = 2; print x; } print x;"))
        self.assertEqual(["3"], run("var x = 1; { x = 3; } print x;"))
        self.assertEqual(["inner", "outer"], run(
            'var a = "outer"; { var a = "inner"; { print a; } } print a;'
        ))

    def test_control_flow(self):
        cases = {
            "if (0) print 1; else print 2;": ["1"],
            'if (nil) print 1; else print 2;': ["2"],
            "if (false) print 1;": [],
            "var i = 0; while (i < 3) { print i; i = i + 1; }": ["0", "1", "2"],
            "for (var i = 0; i < 3; i = i + 1) print i;": ["0", "1", "2"],
            "var a = 0; var b = 1; for (var n = 0; n < 6; n = n + 1) { var t = a; a = b; b = t + b; } print a;": ["8"],
        }
        for case, expected in cases.items():
            self.assertEqual(expected, run(case), case)

    def test_for_scope(self):
        with self.assertRaises(LoxRuntimeError):
            run("for (var i = 0; i < 1; i = i + 1) {} print i;")

    def test_environment_restored_after_error(self):
        interpreter = Interpreter(stdout=io.StringIO())
        with self.assertRaises(LoxRuntimeError):
            run("var x = 1; { var x = 2; print undefined; }", interpreter)
        self.assertIs(interpreter.globals, interpreter.environment)
        self.assertEqual(["1"], run("print x;", interpreter))


class FunctionTestCase(unittest.TestCase):

    def test_call_and_return(self):
        cases = {
            "fun add(a, b) { return a + b; } print add(1, 2);": ["3"],
            "fun f() {} print f();": ["nil"],
            "fun f() { return; } print f();": ["nil"],
            "fun f() { print 1; return 2; print 3; } print f();": ["1", "2"],
            "fun f(n) { while (true) { if (n > 2) return n; n = n + 1; } } print f(0);": ["3"],
            "fun f(n) { for (;;) { return n; } } print f(7);": ["7"],
            "fun f() {} print f;": ["<fn f>"],
            "fun f(a) { var a = a + 1; return a; } print f(1);": ["2"],
        }
        for case, expected in cases.items():
            self.assertEqual(expected, run(case), case)

    def test_recursion(self):
        source = "fun fib(n) { if (n < 2) return n; return fib(n - 1) + fib(n - 2); } print fib(15);"
        self.assertEqual(["610"], run(source))

    def test_closures(self):
        source = """
            fun counter() {
                var i = 0;
                fun inc() { i = i + 1; return i; }
                return inc;
            }
            var c1 = counter();
            var c2 = counter();
            print c1();
            print c1();
            print c2();
        """
        self.assertEqual(["1", "2", "1"], run(source))

    def test_closure_captures_declaring_scope(self):
        source = """
            fun caller() { var a = "caller"; return shower(); }
            fun shower() { return a; }
            var a = "global";
            print caller();
        """
        self.assertEqual(["global"], run(source))

    def test_names_resolved_at_call_time(self):
        source = """
            var a = "global";
            {
                fun show() { print a; }
                show();
                var a = "block";
                show();
            }
        """
        self.assertEqual(["global", "block"], run(source))

    def test_call_errors(self):
        cases = {
            "fun f(a, b) { print 1; } f(1);": "Expected 2 arguments but got 1.",
            "fun f() {} f(1, 2, 3);": "Expected 0 arguments but got 3.",
            '"not a function"();': "Can only call functions and classes.",
            "nil();": "Can only call functions and classes.",
            "clock(1);": "Expected 0 arguments but got 1.",
        }
        for case, message in cases.items():
            interpreter = Interpreter()
            with self.assertRaises(LoxRuntimeError) as ctx:
                run(case, interpreter)
            self.assertEqual(message, ctx.exception.message, case)
            self.assertEqual("", interpreter.stdout.getvalue(), case)  # body never ran

    def test_arguments_evaluated_left_to_right(self):
        source = """
            var log = "";
            fun note(s) { log = log + s; return s; }
            fun three(a, b, c) { return a + b + c; }
            print three(note("a"), note("b"), note("c"));
            print log;
        """
        self.assertEqual(["abc", "abc"], run(source))

    def test_stack_overflow(self):
        interpreter = Interpreter(stdout=io.StringIO(), max_call_depth=50)
        with self.assertRaises(LoxRuntimeError) as ctx:
            run("fun f(n) { return f(n + 1); } f(0);", interpreter)
        self.assertEqual("Stack overflow.", ctx.exception.message)
        self.assertEqual(0, interpreter.call_depth)

    def test_deep_recursion_within_default_depth(self):
        source = "fun down(n) { if (n == 0) return 0; return down(n - 1); } print down(990);"
        self.assertEqual(["0"], run(source, Interpreter()))

    def test_host_stack_exhaustion_is_stack_overflow(self):
        interpreter = Interpreter(stdout=io.StringIO())
        statements, __ = parse(scan("print 1;")[0])
        with mock.patch.object(Interpreter, "execute", side_effect=RecursionError):
            with self.assertRaises(LoxRuntimeError) as ctx:
                interpreter.interpret(statements)
        self.assertEqual("Stack overflow.", ctx.exception.message)

        expr = Parser(scan("1 + 2")[0]).parse_expression()
        with mock.patch.object(Interpreter, "evaluate", side_effect=RecursionError):
            with self.assertRaises(LoxRuntimeError) as ctx:
                interpreter.interpret_expression(expr)
        self.assertEqual("Stack overflow.", ctx.exception.message)

    def test_native_clock(self):
        value = evaluate("clock()")
        self.assertIsInstance(value, float)
        self.assertGreater(value, 0)

        clock = Interpreter().globals.values["clock"]
        self.assertIsInstance(clock, NativeFunction)
        self.assertEqual(0, clock.arity())

    def test_function_values(self):
        interpreter = Interpreter(stdout=io.StringIO())
        run("fun f(a, b) {} var g = f;", interpreter)

        function = interpreter.globals.values["f"]
        self.assertIsInstance(function, LoxFunction)
        self.assertEqual(2, function.arity())
        self.assertIs(interpreter.globals, function.closure)
        self.assertTrue(evaluate("f == g", interpreter))
        self.assertFalse(evaluate("f == clock", interpreter))


class OutcomeTestCase(unittest.TestCase):

    def test_outcomes(self):
        self.assertFalse(COMPLETED.returning)
        outcome = ExecutionOutcome.of_return(None)
        self.assertTrue(outcome.returning)
        self.assertIsNone(outcome.value)


if __name__ == '__main__':
    unittest.main()
